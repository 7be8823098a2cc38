"""Application layer: configuration, market data simulation and live signal service."""
