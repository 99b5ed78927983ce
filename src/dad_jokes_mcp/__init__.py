"""Dad Jokes MCP Server.

Random dad jokes and MuscleWiki exercise search exposed as MCP tools,
with an image proxy for the exercise widget.
"""

__version__ = "1.0.0"
