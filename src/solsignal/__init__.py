"""SolSignal: wallet activity alerts for Solana addresses."""

__version__ = "0.1.0"
