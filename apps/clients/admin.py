from django.contrib import admin

from .models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ('name', 'company', 'tax_id', 'email', 'phone', 'is_active', 'created_at')
    search_fields = ('name', 'company__name', 'tax_id', 'email', 'phone')
    list_filter = ('is_active', 'company')
    ordering = ('company__name', 'name')
