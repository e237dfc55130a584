from django.contrib import admin

from .models import Payout


@admin.register(Payout)
class PayoutAdmin(admin.ModelAdmin):
    list_display = ['psychologist_name', 'amount', 'status', 'requested_at', 'processed_at']
    list_filter = ['status']
    search_fields = ['psychologist_name', 'psychologist__email']
    readonly_fields = ['payout_id', 'requested_at']
