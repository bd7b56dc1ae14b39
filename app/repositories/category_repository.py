"""
Repository for Category database operations
"""

from sqlalchemy.exc import SQLAlchemyError
from db import db
from exceptions import DatabaseException
from models.category import Category


class CategoryRepository:
    """Repository for Category database operations"""

    @staticmethod
    def get_by_id(id):
        """Get Category by ID"""
        return db.session.get(Category, id)

    @staticmethod
    def get_or_create(name):
        """Get a category by name, creating it when missing"""
        item = Category.query.filter_by(name=name).first()
        if item:
            return item
        try:
            item = Category(name=name)
            db.session.add(item)
            db.session.commit()
            db.session.refresh(item)
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise DatabaseException(f"Could not create category {name!r}: {e}")
