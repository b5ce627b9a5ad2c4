from sqlalchemy.orm import declarative_base
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy import *


Base = declarative_base()


class Team(Base):
    __tablename__ = 'teams'

    name = Column(String(255), primary_key=True)


class User(Base):
    __tablename__ = 'users'

    id = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=False)
    team_name = Column(String(255), ForeignKey('teams.name'), nullable=False, index=True)
    is_active = Column(Boolean(), nullable=False, default=True)

    __table_args__ = (
        Index('ix_users_team_active', 'team_name', 'is_active'),
    )


class PullRequest(Base):
    __tablename__ = 'pull_requests'

    id = Column(String(255), primary_key=True)
    title = Column(String(255), nullable=False)
    author_id = Column(String(255), ForeignKey('users.id'), nullable=False, index=True)
    status = Column(String(16), nullable=False, default='OPEN')
    reviewers = Column(ARRAY(String(255)), nullable=False, default=list)
    need_more_reviewers = Column(Boolean(), nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    merged_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("status IN ('OPEN', 'MERGED')", name='ck_pull_requests_status'),
    )
