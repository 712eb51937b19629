"""Run: python -m singularity_mcp"""

from singularity_mcp.cli import main

main()
