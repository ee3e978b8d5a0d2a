"""Simulation runtime: entities, hazards, spawning and the generation manager."""
