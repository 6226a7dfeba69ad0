"""Neoflix favorites API backed by Neo4j."""
