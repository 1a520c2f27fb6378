"""Community style registry client: auth, search, install and publish."""
from __future__ import annotations

import json
import logging
import os
import re
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import requests

from glint.emotions import REQUIRED_EMOTIONS
from glint.styles import MANIFEST_NAME
from glint.utils.config import AppConfig
from glint.utils.file_utils import ensure_dir, list_stems, sha256_hex

logger = logging.getLogger(__name__)

AUTH_FILE_NAME = "auth.json"
# slugs become directory names, so no separators and no leading dot
STYLE_REF_RE = re.compile(r"^@?([\w-]+)/(\w[\w.-]*)$")
ASSET_SUFFIXES = (".svg", ".png")
_TIMEOUT = 30


class RegistryError(RuntimeError):
    pass


@dataclass
class AuthConfig:
    token: str
    username: str
    registry: str


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return (response.text or "").strip() or str(response.status_code)
    if isinstance(body, dict):
        message = body.get("error") or str(response.status_code)
        if body.get("details"):
            message += f" ({json.dumps(body['details'])})"
        return message
    return str(body)


def _check(response: requests.Response, context: str) -> requests.Response:
    if response.status_code >= 400:
        raise RegistryError(f"{context}: {_error_message(response)}")
    return response


def _asset_file_name(entry: Dict[str, Any]) -> str:
    """File name for a downloaded emotion; only known emotions and formats are accepted."""
    emotion = entry.get("emotion")
    if emotion not in REQUIRED_EMOTIONS:
        raise RegistryError(f"Registry listed an unknown emotion: {emotion!r}")
    suffix = Path(str(entry.get("url", "")).split("?")[0]).suffix.lower() or ".png"
    if suffix not in ASSET_SUFFIXES:
        raise RegistryError(f"Unsupported file type for {emotion}: {suffix}")
    return f"{emotion}{suffix}"


class RegistryClient:
    def __init__(self, config: AppConfig, sleep: Callable[[float], None] = time.sleep) -> None:
        self.config = config
        self.base_url = config.registry_url
        self._sleep = sleep

    # --- Auth ---

    @property
    def auth_file(self) -> Path:
        return self.config.config_dir / AUTH_FILE_NAME

    def load_auth(self) -> Optional[AuthConfig]:
        if not self.auth_file.exists():
            return None
        try:
            return AuthConfig(**json.loads(self.auth_file.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, TypeError, OSError) as exc:
            logger.warning("Ignoring unreadable %s: %s", self.auth_file, exc)
            return None

    def save_auth(self, auth: AuthConfig) -> None:
        ensure_dir(self.config.config_dir)
        self.auth_file.write_text(json.dumps(asdict(auth), indent=2), encoding="utf-8")
        os.chmod(self.auth_file, 0o600)

    def get_token(self) -> Optional[str]:
        if self.config.settings.glint_token:
            return self.config.settings.glint_token
        auth = self.load_auth()
        return auth.token if auth else None

    def _auth_headers(self) -> Dict[str, str]:
        token = self.get_token()
        if not token:
            raise RegistryError("Not authenticated. Run: glint auth login")
        return {"Authorization": f"Bearer {token}"}

    def login(self, prompt: Callable[[str, str], None]) -> str:
        """Run the device-code flow; ``prompt(url, code)`` tells the user where to go."""
        response = _check(requests.post(f"{self.base_url}/api/auth/device/code", timeout=_TIMEOUT), "Failed to start auth")
        code = response.json()
        prompt(code["verification_uri"], code["user_code"])

        interval = code.get("interval") or 5
        deadline = time.monotonic() + (code.get("expires_in") or 900)
        while time.monotonic() < deadline:
            self._sleep(interval)
            token_data = requests.post(
                f"{self.base_url}/api/auth/device/token",
                json={"device_code": code["device_code"]},
                timeout=_TIMEOUT,
            ).json()

            error = token_data.get("error")
            if error == "authorization_pending":
                continue
            if error:
                raise RegistryError(token_data.get("error_description") or error)
            if token_data.get("token"):
                username = token_data["user"]["username"]
                self.save_auth(AuthConfig(token=token_data["token"], username=username, registry=self.base_url))
                return username

        raise RegistryError("Authorization timed out")

    def whoami(self) -> Dict[str, Any]:
        response = requests.get(f"{self.base_url}/api/auth/me", headers=self._auth_headers(), timeout=_TIMEOUT)
        return _check(response, "Auth failed").json()

    def create_token(self, name: str) -> Dict[str, Any]:
        response = requests.post(
            f"{self.base_url}/api/auth/tokens",
            json={"name": name},
            headers=self._auth_headers(),
            timeout=_TIMEOUT,
        )
        return _check(response, "Failed to create token").json()

    # --- Styles ---

    def search(self, query: Optional[str] = None, author: Optional[str] = None) -> Any:
        params = {k: v for k, v in (("search", query), ("author", author)) if v}
        response = requests.get(f"{self.base_url}/api/styles", params=params, timeout=_TIMEOUT)
        return _check(response, "Search failed").json()

    def get_style_info(self, author: str, slug: str) -> Dict[str, Any]:
        response = requests.get(f"{self.base_url}/api/styles/{author}/{slug}", timeout=_TIMEOUT)
        if response.status_code >= 400:
            raise RegistryError(f"Style not found: @{author}/{slug}")
        return response.json()

    def install(self, ref: str) -> Path:
        """Install ``@author/slug`` into the user styles directory."""
        match = STYLE_REF_RE.match(ref)
        if not match:
            raise RegistryError(f"Invalid style reference: {ref}. Use @author/name")
        author, slug = match.groups()

        response = requests.get(f"{self.base_url}/api/styles/{author}/{slug}/download", timeout=_TIMEOUT)
        if response.status_code >= 400:
            raise RegistryError(f"Style not found: @{author}/{slug}")
        data = response.json()
        targets = [(entry, _asset_file_name(entry)) for entry in data["emotions"]]

        install_dir = ensure_dir(self.config.styles_dir / slug)
        installed: List[str] = []
        for entry, file_name in targets:
            emotion = entry["emotion"]
            download = requests.get(entry["url"], timeout=_TIMEOUT)
            if download.status_code >= 400:
                raise RegistryError(f"Failed to download {emotion}")
            digest = sha256_hex(download.content)
            if entry.get("hash") and digest != entry["hash"]:
                raise RegistryError(f"Hash mismatch for {emotion}: expected {entry['hash']}, got {digest}")
            (install_dir / file_name).write_bytes(download.content)
            installed.append(emotion)

        manifest = {
            "specVersion": "1.0",
            "name": slug,
            "version": data.get("version"),
            "description": data.get("description"),
            "author": data.get("author"),
            "emotions": installed,
        }
        (install_dir / MANIFEST_NAME).write_text(json.dumps(manifest, indent=2), encoding="utf-8")
        logger.info("Installed @%s/%s into %s", author, slug, install_dir)
        return install_dir

    def publish(self, style_name: str) -> Dict[str, Any]:
        headers = self._auth_headers()
        style_dir = self.config.styles_dir / style_name
        if not style_dir.is_dir():
            raise RegistryError(f"Style directory not found: {style_dir}")

        suffix = ".svg" if list_stems(style_dir, ".svg") else ".png"
        emotions = list_stems(style_dir, suffix)
        missing = [e for e in REQUIRED_EMOTIONS if e not in emotions]
        if missing:
            raise RegistryError(f"Missing required emotions: {', '.join(missing)}")

        contents = {e: (style_dir / f"{e}{suffix}").read_bytes() for e in emotions}
        hashes = {f"{e}{suffix}": sha256_hex(blob) for e, blob in contents.items()}

        manifest_path = style_dir / MANIFEST_NAME
        if manifest_path.exists():
            manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
        else:
            manifest = {
                "specVersion": "1.0",
                "name": style_name,
                "version": "1.0.0",
                "description": f"{style_name} style",
            }
        manifest["emotions"] = emotions
        manifest["files"] = hashes

        content_type = "image/svg+xml" if suffix == ".svg" else "image/png"
        files = {e: (f"{e}{suffix}", blob, content_type) for e, blob in contents.items()}
        form: Dict[str, str] = {"manifest": json.dumps(manifest)}
        readme = style_dir / "README.md"
        if readme.exists():
            form["readme"] = readme.read_text(encoding="utf-8")

        response = requests.post(
            f"{self.base_url}/api/styles",
            data=form,
            files=files,
            headers=headers,
            timeout=_TIMEOUT,
        )
        return _check(response, "Publish failed").json()
