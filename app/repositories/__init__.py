"""레포지토리 패키지 — 쿼리 계층.

Repository package — Query layer over the async SQLAlchemy session.
BaseRepository provides generic CRUD, paging and soft delete; the entity
repositories add the lookups the services need.
"""
