"""Static constants, configuration models, loading and CLI prompts."""
