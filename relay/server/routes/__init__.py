"""HTTP routes for the chat relay server."""
