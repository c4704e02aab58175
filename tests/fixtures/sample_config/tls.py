"""TLS settings."""

from dataclasses import dataclass, field


@dataclass
class TLSConfig:
    """TLSConfig holds certificate settings."""

    cert_file: str = field(default="", metadata={"yaml": "cert_file"})
    """CertFile is the path to the PEM certificate."""

    # Mode selects how peer certificates are verified.
    # values:
    #   - strict
    #   - relaxed
    mode: str = field(default="strict", metadata={"yaml": "mode"})
