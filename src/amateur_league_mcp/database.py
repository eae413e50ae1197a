"""Neo4j database connection and operations for the amateur league store."""

import logging
from contextlib import contextmanager
from typing import Any, Generator, Optional

from neo4j import GraphDatabase, Driver, Session
from neo4j.exceptions import ClientError

from .config import Settings

LOGGER = logging.getLogger(__name__)


class Neo4jDatabase:
    """Neo4j database connection manager."""

    def __init__(
        self,
        uri: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or Settings.from_env()
        self.uri = uri or settings.neo4j_uri
        self.user = user or settings.neo4j_user
        self.password = password or settings.neo4j_password
        self._driver: Optional[Driver] = None

    def connect(self) -> None:
        """Establish connection to Neo4j database."""
        if self._driver is None:
            LOGGER.info("Connecting to Neo4j at %s", self.uri)
            self._driver = GraphDatabase.driver(
                self.uri,
                auth=(self.user, self.password),
            )

    def close(self) -> None:
        """Close database connection."""
        if self._driver:
            self._driver.close()
            self._driver = None

    @property
    def driver(self) -> Driver:
        """Get the database driver, connecting if necessary."""
        if self._driver is None:
            self.connect()
        return self._driver  # type: ignore

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Create a database session context manager."""
        session = self.driver.session()
        try:
            yield session
        finally:
            session.close()

    def execute_query(
        self, query: str, parameters: Optional[dict[str, Any]] = None
    ) -> list[dict[str, Any]]:
        """Execute a Cypher query and return results."""
        with self.session() as session:
            result = session.run(query, parameters or {})
            return [dict(record) for record in result]

    def execute_write(
        self, query: str, parameters: Optional[dict[str, Any]] = None
    ) -> None:
        """Execute a write query."""
        with self.session() as session:
            session.run(query, parameters or {}).consume()

    def clear_database(self) -> None:
        """Clear all data from the database."""
        self.execute_write("MATCH (n) DETACH DELETE n")

    def create_constraints(self) -> None:
        """Create uniqueness constraints for node types."""
        constraints = [
            "CREATE CONSTRAINT team_id IF NOT EXISTS FOR (t:Team) REQUIRE t.team_id IS UNIQUE",
            "CREATE CONSTRAINT team_name IF NOT EXISTS FOR (t:Team) REQUIRE t.name IS UNIQUE",
            "CREATE CONSTRAINT matchday_id IF NOT EXISTS FOR (md:Matchday) REQUIRE md.matchday_id IS UNIQUE",
            "CREATE CONSTRAINT jornada IF NOT EXISTS FOR (md:Matchday) REQUIRE md.jornada IS UNIQUE",
            "CREATE CONSTRAINT match_key IF NOT EXISTS FOR (m:Match) REQUIRE m.match_key IS UNIQUE",
            "CREATE CONSTRAINT report_id IF NOT EXISTS FOR (r:MatchReport) REQUIRE r.report_id IS UNIQUE",
        ]
        for constraint in constraints:
            try:
                self.execute_write(constraint)
            except ClientError as exc:
                # Constraint may already exist in an equivalent form
                LOGGER.debug("Constraint not created: %s", exc)

    def create_indexes(self) -> None:
        """Create indexes for commonly queried properties."""
        indexes = [
            "CREATE INDEX match_status IF NOT EXISTS FOR (m:Match) ON (m.status)",
            "CREATE INDEX match_teams IF NOT EXISTS FOR (m:Match) ON (m.home, m.away)",
            "CREATE INDEX player_name IF NOT EXISTS FOR (p:Player) ON (p.name)",
            "CREATE INDEX entry_team IF NOT EXISTS FOR (e:ReportEntry) ON (e.team)",
        ]
        for index in indexes:
            try:
                self.execute_write(index)
            except ClientError as exc:
                LOGGER.debug("Index not created: %s", exc)
