"""Allow ``python -m xai_mcp``."""

from xai_mcp.main import main

if __name__ == "__main__":
    main()
