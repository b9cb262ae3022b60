"""
Branch model — Where stock exists.
"""

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


class Branch(models.Model):
    """
    A physical store holding its own stock.

    Branches are stable entities, created by admin flows. The inventory core
    only reads them.

    At most one branch is primary (``is_primary``). It is the fallback
    returned by ``inventory.resolve_branch()`` when the caller names none.

    Examples:
        Branch.objects.create(code='matriz', name='Matriz Centro', is_primary=True)
        Branch.objects.create(code='norte', name='Sucursal Norte')
    """

    code = models.SlugField(
        unique=True,
        max_length=50,
        verbose_name=_('Código'),
        help_text=_('Identificador único (ej: matriz, norte)'),
    )
    name = models.CharField(
        max_length=100,
        verbose_name=_('Nombre'),
    )
    is_primary = models.BooleanField(
        default=False,
        verbose_name=_('Matriz'),
        help_text=_('Sucursal por defecto cuando no se indica otra.'),
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Activa'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Sucursal')
        verbose_name_plural = _('Sucursales')
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['is_primary'],
                condition=Q(is_primary=True),
                name='unique_primary_branch',
            ),
        ]

    def __str__(self) -> str:
        return self.name
