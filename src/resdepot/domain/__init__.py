"""Domain layer: resource model, ports and the resource check."""
