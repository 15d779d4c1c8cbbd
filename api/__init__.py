"""HTTP layer: routes, dependencies, middleware and response models"""
