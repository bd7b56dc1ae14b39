"""
Repositories package

Each repository encapsulates database operations for a model:
- replays_repository.py
- category_repository.py
- user_repository.py

Usage:
    from repositories.replays_repository import ReplaysRepository
    page = ReplaysRepository.get_paged({"league": "gold"})
"""
