"""
VideoAPI - Access Policies
Role checks wrapped around the unpoliced stores, one policy per request.
"""
from app.policy.alert import AlertPolicy
from app.policy.base import Policy
from app.policy.camera import CameraPolicy
from app.policy.media import MediaPolicy
from app.policy.user import UserPolicy

__all__ = ["AlertPolicy", "CameraPolicy", "MediaPolicy", "Policy", "UserPolicy"]
