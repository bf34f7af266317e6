from django.contrib.auth.models import AbstractUser
from django.db import models
import uuid


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.
    Every account acts under exactly one dashboard role.
    """
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    
    class UserRole(models.TextChoices):
        ADMIN = 'ADMIN', 'Administrator'
        SELLER = 'SELLER', 'Seller'
        SUPPLIER = 'SUPPLIER', 'Supplier'
    
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.SELLER,
        db_index=True,
        help_text="User's dashboard role"
    )
    
    full_name = models.CharField(
        max_length=200,
        blank=True,
        help_text="Display name shown in rankings"
    )
    
    image = models.CharField(
        max_length=500,
        blank=True,
        help_text="Storage key of the profile picture"
    )
    
    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['role', 'is_active'], name='users_role_active_idx'),
        ]
    
    def __str__(self):
        return f"{self.get_full_name()} ({self.get_role_display()})"
    
    def get_full_name(self):
        """Return the display name, falling back to first/last name or username."""
        if self.full_name:
            return self.full_name
        full_name = super().get_full_name()
        return full_name if full_name else self.username
