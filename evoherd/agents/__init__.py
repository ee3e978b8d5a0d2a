"""Agent identity, traits, snapshots and the agent registry."""
