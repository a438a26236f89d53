"""The photo pipeline: config, encoder, prompts, providers, generation client and orchestrator."""
