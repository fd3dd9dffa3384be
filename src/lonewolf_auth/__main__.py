"""LoneWolf Auth CLI.

Usage:
    python -m lonewolf_auth secret                  # New random secret
    python -m lonewolf_auth enroll alice --qr-out qr.png
    python -m lonewolf_auth code <secret>           # Current code
    python -m lonewolf_auth verify 123456 <secret>  # Check a code
    python -m lonewolf_auth settings                # Effective configuration
"""

from lonewolf_auth.cli import main

if __name__ == "__main__":
    main()
