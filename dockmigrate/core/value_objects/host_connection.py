"""HostConnection value object"""

from dataclasses import dataclass
import re
from ..exceptions.validation_exceptions import InvalidHostnameError, InvalidPortError


@dataclass(frozen=True)
class HostConnection:
    """Immutable value object for the SSH endpoint of the destination host"""

    hostname: str
    username: str = "root"
    port: int = 22

    def __post_init__(self):
        if not self.hostname:
            raise InvalidHostnameError("Hostname cannot be empty", field="host")

        if len(self.hostname) > 253:
            raise InvalidHostnameError("Hostname cannot exceed 253 characters", field="host")

        if not self._is_valid_hostname(self.hostname):
            raise InvalidHostnameError(f"Invalid hostname format: {self.hostname}", field="host")

        if not self.username:
            raise InvalidHostnameError("Username cannot be empty", field="user")

        # '@' and ':' delimit the scp target; a leading '-' is read as an ssh option
        if not re.fullmatch(r'[^\s@:-][^\s@:]*', self.username):
            raise InvalidHostnameError(
                f"Invalid username: {self.username}. "
                "Must not contain whitespace, '@' or ':' and must not start with '-'.",
                field="user"
            )

        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise InvalidPortError("Port must be an integer", field="port")

        if not (1 <= self.port <= 65535):
            raise InvalidPortError(f"Port must be between 1 and 65535, got: {self.port}", field="port")

    def _is_valid_hostname(self, hostname: str) -> bool:
        """Validate hostname format (IPv4, IPv6, or domain name)"""
        return (
            self._is_valid_ipv4(hostname)
            or self._is_valid_ipv6(hostname)
            or self._is_valid_domain(hostname)
        )

    def _is_valid_ipv4(self, ip: str) -> bool:
        try:
            parts = ip.split('.')
            if len(parts) != 4:
                return False
            for part in parts:
                if not (0 <= int(part) <= 255):
                    return False
                # No leading zeros except for 0 itself
                if len(part) > 1 and part[0] == '0':
                    return False
            return True
        except (ValueError, AttributeError):
            return False

    def _is_valid_ipv6(self, ip: str) -> bool:
        """Basic IPv6 validation"""
        if ip.count(':') < 2:
            return False
        if ip.count('::') > 1:
            return False
        return bool(re.match(r'^[0-9a-fA-F:]+$', ip))

    def _is_valid_domain(self, domain: str) -> bool:
        if domain.endswith('.'):
            domain = domain[:-1]

        labels = domain.split('.')
        for label in labels:
            if not label or len(label) > 63:
                return False
            if not re.match(r'^[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?$', label):
                return False
        return True

    @property
    def destination(self) -> str:
        """``user@host`` as understood by ssh and scp"""
        if ':' in self.hostname:
            return f"{self.username}@[{self.hostname}]"
        return f"{self.username}@{self.hostname}"

    def remote_path(self, path: str) -> str:
        """scp target for a path on this host"""
        return f"{self.destination}:{path}"

    def to_string(self) -> str:
        if self.port == 22:
            return f"{self.username}@{self.hostname}"
        return f"{self.username}@{self.hostname}:{self.port}"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"HostConnection('{self.hostname}', '{self.username}', {self.port})"
