"""the-finder: rental listing search, subscriptions, and chatbot tools."""
