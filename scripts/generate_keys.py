#!/usr/bin/env python3
"""
Generate a secp256k1 signing key for submitting transactions.

This script generates:
- Private key (signing.priv)
- Public key (signing.pub)
"""

import argparse
import json
import os
from pathlib import Path

from gitchain.tx.signer import TransactionSigner


def generate_keys(output_dir: str = "./keys") -> dict:
    """
    Generate a new key pair.
    
    Args:
        output_dir: Directory to save keys
        
    Returns:
        Dictionary with key paths and the public key
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    
    signer = TransactionSigner.generate()
    
    priv_path = output_path / "signing.priv"
    priv_path.write_text(signer.private_key_hex + "\n")
    os.chmod(priv_path, 0o600)
    
    pub_path = output_path / "signing.pub"
    pub_path.write_text(signer.public_key + "\n")
    
    info = {
        "private_key_path": str(priv_path),
        "public_key_path": str(pub_path),
        "public_key": signer.public_key,
    }
    
    info_path = output_path / "key_info.json"
    with open(info_path, "w") as f:
        json.dump(info, f, indent=2)
    
    return info


def main():
    parser = argparse.ArgumentParser(description="Generate a secp256k1 signing key")
    parser.add_argument(
        "--output-dir", "-o",
        default="./keys",
        help="Output directory for keys (default: ./keys)"
    )
    parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Overwrite existing keys"
    )
    
    args = parser.parse_args()
    
    output_path = Path(args.output_dir)
    if (output_path / "signing.priv").exists() and not args.force:
        print(f"Keys already exist at {args.output_dir}")
        print("Use --force to overwrite")
        return
    
    info = generate_keys(args.output_dir)
    
    print(f"Keys saved to: {args.output_dir}/")
    print("   - signing.priv (KEEP SECRET!)")
    print("   - signing.pub")
    print("   - key_info.json")
    print(f"\nPublic key: {info['public_key']}")


if __name__ == "__main__":
    main()
