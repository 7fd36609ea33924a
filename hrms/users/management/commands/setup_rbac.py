from collections import defaultdict

from django.contrib.auth.models import Group
from django.contrib.auth.models import Permission
from django.core.management.base import BaseCommand
from django.utils.translation import gettext as _

from hrms.users.api.permissions import ROLE_HR
from hrms.users.api.permissions import ROLE_STAFF
from hrms.users.api.permissions import ROLE_SUPER_ADMIN

FULL_ACTIONS = ("add", "change", "delete", "view")
MANAGE_ACTIONS = ("add", "change", "view")
READ_ACTIONS = ("view",)

# Django model permissions granted per role, by app label.
ROLE_APP_ACTIONS = {
    ROLE_HR: {
        "payroll": FULL_ACTIONS,
        "staff": FULL_ACTIONS,
        "recruitment": FULL_ACTIONS,
        "audit": READ_ACTIONS,
        "companies": READ_ACTIONS,
        "users": MANAGE_ACTIONS,
    },
    ROLE_STAFF: {
        "companies": READ_ACTIONS,
        "recruitment": READ_ACTIONS,
    },
}

# Narrower grants on single models, added on top of the app rules.
ROLE_MODEL_ACTIONS = {
    ("payroll", "payslip"): {ROLE_STAFF: READ_ACTIONS},
    ("recruitment", "jobapplication"): {ROLE_STAFF: ("add", "view")},
    ("users", "user"): {ROLE_STAFF: READ_ACTIONS},
}


class Command(BaseCommand):
    help = _("Create the Super Admin, HR and Staff groups with their permissions")

    def handle(self, *args, **options):
        grants = self._grants()
        for role in (ROLE_SUPER_ADMIN, ROLE_HR, ROLE_STAFF):
            group, _created = Group.objects.get_or_create(name=role)
            perms = Permission.objects.filter(pk__in=grants[role])
            group.permissions.set(perms)
            msg = f"Ensured group '{role}' with permissions ({len(grants[role])})"
            self.stdout.write(self.style.SUCCESS(msg))
        self.stdout.write(self.style.SUCCESS("RBAC setup complete"))

    def _grants(self) -> dict[str, set[int]]:
        """Permission ids per role. Super Admin holds every managed permission."""
        grants: dict[str, set[int]] = defaultdict(set)
        labels = {label for rules in ROLE_APP_ACTIONS.values() for label in rules}
        labels.update(label for label, _model in ROLE_MODEL_ACTIONS)

        perms = Permission.objects.filter(content_type__app_label__in=labels)
        for perm in perms.select_related("content_type"):
            app_label = perm.content_type.app_label
            model_name = perm.content_type.model
            action = perm.codename.removesuffix(f"_{model_name}")
            grants[ROLE_SUPER_ADMIN].add(perm.pk)

            for role, rules in ROLE_APP_ACTIONS.items():
                if action in rules.get(app_label, ()):
                    grants[role].add(perm.pk)
            for role, actions in ROLE_MODEL_ACTIONS.get(
                (app_label, model_name), {}
            ).items():
                if action in actions:
                    grants[role].add(perm.pk)
        return grants
