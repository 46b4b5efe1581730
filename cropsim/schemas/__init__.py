"""Pydantic schemas: species configuration and the persisted chunk format."""
