from collections.abc import Sequence
from typing import Any

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from factory import Faker
from factory import LazyAttribute
from factory import Sequence as FactorySequence
from factory import SubFactory
from factory import post_generation
from factory.django import DjangoModelFactory

from hrms.companies.tests.factories import CompanyFactory


class UserFactory(DjangoModelFactory):
    username = FactorySequence(lambda n: f"user{n}")
    email = LazyAttribute(lambda o: f"{o.username}@example.com")
    first_name = Faker("first_name")
    last_name = Faker("last_name")
    company = SubFactory(CompanyFactory)

    @post_generation
    def password(self, create: bool, extracted: Sequence[Any], **kwargs):  # noqa: FBT001
        password = (
            extracted
            if extracted
            else Faker(
                "password",
                length=42,
                special_chars=True,
                digits=True,
                upper_case=True,
                lower_case=True,
            ).evaluate(None, None, extra={"locale": None})
        )
        self.set_password(password)

    @post_generation
    def roles(self, create: bool, extracted: Sequence[str], **kwargs):  # noqa: FBT001
        if not create or not extracted:
            return
        for name in extracted:
            group, _ = Group.objects.get_or_create(name=name)
            self.groups.add(group)

    @classmethod
    def _after_postgeneration(cls, instance, create, results=None):
        """Save again the instance if creating and at least one hook ran."""
        if create and results and not cls._meta.skip_postgeneration_save:
            # Some post-generation hooks ran, and may have modified us.
            instance.save()

    class Meta:
        model = get_user_model()
        django_get_or_create = ["username"]
