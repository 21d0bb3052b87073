import os
from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model

from accounts.models import Role
from accounts.roles import set_role


class Command(BaseCommand):
    help = "Create/update an initial admin from env vars (non-interactive)."

    def handle(self, *args, **options):
        username = os.getenv("ADMIN_USERNAME", "").strip()
        email = os.getenv("ADMIN_EMAIL", "").strip()
        password = os.getenv("ADMIN_PASSWORD", "").strip()

        if not username or not password:
            self.stdout.write("bootstrap_admin: ADMIN_USERNAME/ADMIN_PASSWORD not set; skipping.")
            return

        User = get_user_model()
        user, created = User.objects.get_or_create(username=username, defaults={"email": email})
        if created:
            user.is_staff = True
            user.is_superuser = True
            user.set_password(password)
            user.save()
            set_role(user, Role.ADMIN)
            self.stdout.write(f"bootstrap_admin: created admin '{username}'.")
            return

        # ensure permissions and refresh password
        user.is_staff = True
        user.is_superuser = True
        user.set_password(password)
        if email:
            user.email = email
        user.save()
        set_role(user, Role.ADMIN)
        self.stdout.write(f"bootstrap_admin: ensured admin '{username}'.")
