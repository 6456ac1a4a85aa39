"""Vendor SDK connectors: AWS, database, HTTP, email, Slack and Twilio."""
