"""
Infrastructure layer: storage engine, repositories, unit of work, event
dispatch, logging and dependency wiring.
"""
