"""Pydantic and dataclass models for kubesnap."""
