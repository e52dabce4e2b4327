"""
Classification of SCC users and groups into RBAC subjects.
"""

import logging
import re
from collections.abc import Iterable

from ocp_translate.models.rbac import Subject

logger = logging.getLogger(__name__)

# Identities belonging to the platform itself or to its backup tooling
DEFAULT_EXCLUSION_PATTERN = r"openshift|velero|management-infra"
DEFAULT_SERVICE_ACCOUNT_PATTERN = r"system:serviceaccount"

# system:serviceaccount:<namespace>:<name>; the last two segments are always
# the namespace and the name
SERVICE_ACCOUNT_SEGMENTS = 4


class SubjectClassifier:
    """
    Turns identity strings into typed subjects, dropping excluded identities.

    Output order follows input order; nothing is deduplicated.

    Example:
        >>> classifier = SubjectClassifier()
        >>> [s.to_dict() for s in classifier.classify_users(["system:serviceaccount:web:api"])]
        [{'kind': 'ServiceAccount', 'name': 'api', 'namespace': 'web'}]
    """

    def __init__(
        self,
        exclusion_pattern: str = DEFAULT_EXCLUSION_PATTERN,
        service_account_pattern: str = DEFAULT_SERVICE_ACCOUNT_PATTERN,
        log: logging.Logger | logging.LoggerAdapter | None = None,
        name: str = "",
        service_account_segments: int = SERVICE_ACCOUNT_SEGMENTS,
    ):
        self.exclusion = re.compile(exclusion_pattern)
        self.service_account = re.compile(service_account_pattern)
        self.service_account_segments = service_account_segments
        self.log = log or logger
        self.name = name

    def is_excluded(self, identity: str) -> bool:
        return bool(self.exclusion.search(identity))

    def classify_users(self, users: Iterable[str]) -> list[Subject]:
        """
        Classify SCC users as ServiceAccount or User subjects.

        Args:
            users: SCC ``users`` entries

        Returns:
            Subjects for every user that is not excluded
        """
        subjects = []
        for user in users:
            if self.is_excluded(user):
                self.log.debug(f"[{self.name}] Skipping excluded user {user}")
                continue
            subject = self._classify_user(user)
            self.log.debug(f"[{self.name}] User subject = {subject}")
            subjects.append(subject)
        return subjects

    def classify_groups(self, groups: Iterable[str]) -> list[Subject]:
        """Classify SCC groups; groups are never service accounts."""
        subjects = []
        for group in groups:
            if self.is_excluded(group):
                self.log.debug(f"[{self.name}] Skipping excluded group {group}")
                continue
            subject = Subject.group(group)
            self.log.debug(f"[{self.name}] Group subject = {subject}")
            subjects.append(subject)
        return subjects

    def classify(self, users: Iterable[str], groups: Iterable[str] = ()) -> list[Subject]:
        """Classify users, then groups, into one ordered subject list."""
        return self.classify_users(users) + self.classify_groups(groups)

    def _classify_user(self, user: str) -> Subject:
        if not self.service_account.search(user):
            return Subject.user(user)

        segments = user.split(":")
        if len(segments) == self.service_account_segments and all(segments):
            return Subject.service_account(namespace=segments[-2], name=segments[-1])

        self.log.warning(
            f"[{self.name}] '{user}' looks like a service account but does not have "
            f"{self.service_account_segments} non-empty ':'-separated segments, "
            "binding it as a User"
        )
        return Subject.user(user)
