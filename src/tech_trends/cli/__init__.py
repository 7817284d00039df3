"""Command-line tools: catalog seeding and an API smoke-test client."""
