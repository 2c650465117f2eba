"""Domain ports (typing.Protocol, structural typing).

Infrastructure adapters implement these without inheriting from them.
"""
