"""
API key management for translate-ai.

Provides storage and retrieval of translation provider keys using:
1. Environment variables (preferred for CI/production)
2. OS keychain via keyring (secure local storage)
3. Local config file (fallback)

Usage:
    from translate_ai.keys import KeyManager
    
    km = KeyManager()
    km.set_key("openai", "sk-...")
    key = km.get_key("openai")
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from translate_ai.translate.base import MissingCredentialError


# Supported services and their env var names
SERVICES = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "deepl": "DEEPL_API_KEY",
}


def env_var_for(service: str) -> str:
    return SERVICES.get(service.lower(), f"{service.upper()}_API_KEY")


@dataclass
class KeyInfo:
    """Information about an API key."""
    service: str
    is_set: bool
    source: str  # 'env', 'keyring', 'config', 'none'
    masked_value: str  # e.g., "sk-...abc"


class KeyManager:
    """Resolve API keys for translation providers.
    
    Priority order for key retrieval:
    1. Environment variable
    2. OS keychain (via keyring)
    3. Local config file (~/.translate-ai/keys.json)
    """
    
    SERVICE_NAME = "translate-ai"
    
    def __init__(self, config_dir: Optional[Path] = None, use_keyring: bool = True):
        self.config_dir = Path(config_dir) if config_dir else Path.home() / ".translate-ai"
        self.config_file = self.config_dir / "keys.json"
        self._keyring_available = use_keyring and self._check_keyring()
    
    def _check_keyring(self) -> bool:
        """Check if an OS keychain backend is usable."""
        try:
            import keyring
            keyring.get_keyring()
            return True
        except Exception:
            return False
    
    def _read_config(self) -> dict:
        if not self.config_file.exists():
            return {}
        try:
            return json.loads(self.config_file.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
    
    def _lookup(self, service: str) -> tuple[Optional[str], str]:
        """Return (key, source) for a service."""
        service = service.lower()
        
        if env_val := os.getenv(env_var_for(service)):
            return env_val, "env"
        
        if self._keyring_available:
            try:
                import keyring
                if key := keyring.get_password(self.SERVICE_NAME, service):
                    return key, "keyring"
            except Exception:
                pass
        
        if key := self._read_config().get(service):
            return key, "config"
        
        return None, "none"
    
    def get_key(self, service: str) -> Optional[str]:
        """Get API key for a service, or None if not configured."""
        key, _ = self._lookup(service)
        return key
    
    def require_key(self, service: str) -> str:
        """Get API key or raise MissingCredentialError."""
        key = self.get_key(service)
        if not key:
            raise MissingCredentialError(service, env_var_for(service))
        return key
    
    def set_key(self, service: str, key: str, use_keyring: bool = True) -> str:
        """Store API key for a service.
        
        Returns:
            Storage location used ('keyring' or 'config')
        """
        service = service.lower()
        
        if use_keyring and self._keyring_available:
            try:
                import keyring
                keyring.set_password(self.SERVICE_NAME, service, key)
                return "keyring"
            except Exception:
                pass
        
        self.config_dir.mkdir(parents=True, exist_ok=True)
        config = self._read_config()
        config[service] = key
        self.config_file.write_text(json.dumps(config, indent=2), encoding="utf-8")
        self.config_file.chmod(0o600)  # Restrict permissions
        
        return "config"
    
    def delete_key(self, service: str) -> bool:
        """Delete stored API key for a service."""
        service = service.lower()
        deleted = False
        
        if self._keyring_available:
            try:
                import keyring
                keyring.delete_password(self.SERVICE_NAME, service)
                deleted = True
            except Exception:
                pass
        
        config = self._read_config()
        if service in config:
            del config[service]
            self.config_file.write_text(json.dumps(config, indent=2), encoding="utf-8")
            deleted = True
        
        return deleted
    
    def get_key_info(self, service: str) -> KeyInfo:
        """Get information about a stored key."""
        key, source = self._lookup(service)
        return KeyInfo(
            service=service.lower(),
            is_set=key is not None,
            source=source,
            masked_value=self.mask_key(key) if key else "",
        )
    
    def list_keys(self) -> list[KeyInfo]:
        """List all supported services and their key status."""
        return [self.get_key_info(service) for service in SERVICES]
    
    @staticmethod
    def mask_key(key: str) -> str:
        """Mask a key for display (show first 4 and last 4 chars)."""
        if len(key) <= 12:
            return "*" * len(key)
        return f"{key[:4]}...{key[-4:]}"
