"""
Test data for dockmigrate tests

Trimmed container inspect documents and compose output, shaped like what
the engine API and docker-autocompose return.
"""

# A container with one named volume on a user-defined network
WEB_INSPECT = {
    "Id": "3f4e8a1b2c9d",
    "Name": "/web",
    "Config": {
        "Image": "nginx:1.25",
        "Env": ["PATH=/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"],
    },
    "Mounts": [
        {
            "Type": "volume",
            "Name": "web-data",
            "Source": "/var/lib/docker/volumes/web-data/_data",
            "Destination": "/data",
            "Driver": "local",
            "RW": True,
        }
    ],
    "NetworkSettings": {
        "Networks": {
            "bridge": {"NetworkID": "a1b2c3", "IPAddress": "172.17.0.2"},
        }
    },
}

# No mounts at all and only the host network
NO_VOLUMES_INSPECT = {
    "Id": "9a8b7c6d5e4f",
    "Name": "/cache",
    "Config": {"Image": "redis:7"},
    "Mounts": [],
    "NetworkSettings": {"Networks": {"host": {}}},
}

# Named volumes, a bind mount, a repeated destination and the host network
MULTI_MOUNT_INSPECT = {
    "Id": "0c1d2e3f4a5b",
    "Name": "/app",
    "Config": {"Image": "registry.local:5000/team/app:2.1"},
    "Mounts": [
        {"Type": "volume", "Name": "app-uploads", "Destination": "/srv/uploads"},
        {"Type": "bind", "Source": "/etc/app", "Destination": "/etc/app"},
        {"Type": "volume", "Name": "app-db", "Destination": "/var/lib/db"},
        {"Type": "volume", "Name": "app-db-shadow", "Destination": "/var/lib/db"},
        {"Type": "volume", "Name": "ignored"},
    ],
    "NetworkSettings": {
        "Networks": {
            "backend": {},
            "host": {},
            "frontend": {},
        }
    },
}

# One named volume mounted at two destinations (-v web-data:/data -v web-data:/backup)
SHARED_VOLUME_INSPECT = {
    "Id": "5d6e7f8a9b0c",
    "Name": "/web",
    "Config": {"Image": "nginx:1.25"},
    "Mounts": [
        {"Type": "volume", "Name": "web-data", "Destination": "/data", "RW": True},
        {"Type": "volume", "Name": "web-data", "Destination": "/backup", "RW": True},
    ],
    "NetworkSettings": {"Networks": {"bridge": {}}},
}

WEB_COMPOSE = """\
version: "3"
services:
  web:
    container_name: web
    image: nginx:1.25
    networks:
      - bridge
    volumes:
      - web-data:/data
volumes:
  web-data:
    external: true
"""

EMPTY_COMPOSE = """\
version: "3"
services: {}
"""
