"""RFI Responder: question extraction and answer drafting for RFI documents."""

__version__ = "0.1.0"
