"""
Allow the nativeswap package to be executed as a module.

This enables running the frame server with:
    python -m nativeswap
    python -m nativeswap --port 8080
"""

from nativeswap.main import main

if __name__ == "__main__":
    main()
