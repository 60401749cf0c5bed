"""
Interactive CLI for the HubSpot object client.

Entry point: `python cli/cli.py` or the `crm-objects` console script.
"""
