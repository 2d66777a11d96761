from django.apps import AppConfig


class GridcolConfig(AppConfig):
    name = 'gridcol'
    verbose_name = 'gridcol'
    default = True
