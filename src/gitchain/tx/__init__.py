"""
Transaction module.

Handles payload encoding, header construction, signing and batch assembly.
"""

from gitchain.tx.builder import TransactionBuilder
from gitchain.tx.preprocess import Preprocessor, PreprocessorRegistry
from gitchain.tx.signer import TransactionSigner

__all__ = [
    "TransactionBuilder",
    "Preprocessor",
    "PreprocessorRegistry",
    "TransactionSigner",
]
