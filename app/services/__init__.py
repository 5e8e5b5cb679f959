"""서비스 패키지 — 회원 관리 비즈니스 로직.

Service package — Business rules for members, roles, bookings, mail,
exports and profile pictures. Entity services extend BaseService and
customize its lifecycle hooks; each module exposes a singleton instance.
"""
