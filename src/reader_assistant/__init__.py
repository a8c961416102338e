"""Reader assistant gateway: image + question answering over selectable vision providers."""
