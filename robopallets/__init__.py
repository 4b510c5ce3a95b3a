"""In-memory ledger modules for a robot economy: datalog, launch, liability, digital twins, lighthouse, subscriptions and XCM links."""

__version__ = "0.1.0"

__all__ = [
    "codec",
    "datalog",
    "digital_twin",
    "launch",
    "liability",
    "lighthouse",
    "rws",
    "signed",
    "support",
    "xcm_info",
]