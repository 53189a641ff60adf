"""HTTP surface publishing the rendered card."""
