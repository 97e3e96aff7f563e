"""Business logic layer, one service per resource."""
