"""
drivefs - a path-addressed filesystem view of Google Drive.

Gates:
    - DriveClient: authorization signal, transport and the retrying request gateway
    - ContentsGate: path resolution, content mapping, uploads and revisions
    - Config: environment/JSON configuration
"""

__version__ = "0.1.0"
