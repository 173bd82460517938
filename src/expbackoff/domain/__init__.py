"""Domain layer: configuration, errors, events and state"""
