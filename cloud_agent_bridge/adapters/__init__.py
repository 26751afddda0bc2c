"""
Chat Platform Adapters
======================

Translation layers between a chat platform and the cloud agent API.
An adapter:
1. Receives an interaction from the platform (webhook)
2. Verifies it came from the platform
3. Translates it into cloud agent API calls
4. Formats the result back into the platform's reply format

Available Adapters:
- discord: slash command, message context menu and modal (see adapters/discord/)
"""
