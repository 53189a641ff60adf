"""Application layer: settings, refresh scheduler and composition root."""
