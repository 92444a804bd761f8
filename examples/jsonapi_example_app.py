"""Example FastAPI app creating articles together with their included author.

Run with:
    uvicorn examples.jsonapi_example_app:app --reload

Then POST to /articles:
    {
        "data": {
            "type": "articles",
            "attributes": {"title": "Hello", "body": "First post"},
            "relationships": {"author": {"data": {"type": "users", "lid": "u1"}}}
        },
        "included": [
            {"type": "users", "lid": "u1", "attributes": {"name": "Jane", "email": "jane@example.com"}}
        ]
    }
"""
from __future__ import annotations

from typing import Iterator

from fastapi import Depends, FastAPI
from sqlalchemy import Column, ForeignKey, Integer, String, create_engine
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker

from jsonapi_compound.log import configure_logging
from jsonapi_compound.middleware import ErrorHandlerMiddleware
from jsonapi_compound.routers import JSONAPIRouter
from jsonapi_compound.sqlalchemy import SQLAlchemyDataLayer, SQLAlchemyRecordAdapter
from jsonapi_compound.viewsets import JSONAPIViewSet

DATABASE_URL = "sqlite:///./jsonapi_example.db"

engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(engine, expire_on_commit=False)

Base = declarative_base()


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    articles = relationship("Article", back_populates="author")


class Article(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    body = Column(String, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"))
    author = relationship("User", back_populates="articles")


ADAPTERS = [
    SQLAlchemyRecordAdapter(model=User, type_="users", fields=["name", "email"]),
    SQLAlchemyRecordAdapter(model=Article, type_="articles", fields=["title", "body"]),
]


class ArticleViewSet(JSONAPIViewSet):
    resource_type = "articles"


def get_session() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_article_viewset(session: Session = Depends(get_session)) -> ArticleViewSet:
    return ArticleViewSet(SQLAlchemyDataLayer(session=session, adapters=ADAPTERS))


configure_logging()
Base.metadata.create_all(engine)

router = JSONAPIRouter()
router.register_viewset("/articles", get_article_viewset)

app = FastAPI(title="JSON:API compound create example")
app.add_middleware(ErrorHandlerMiddleware)
app.include_router(router)
