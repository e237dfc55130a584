from django.contrib import admin

from .models import TherapySession


@admin.register(TherapySession)
class TherapySessionAdmin(admin.ModelAdmin):
    list_display = ['session_id', 'patient_name', 'psychologist_name', 'session_timestamp', 'status', 'rate']
    list_filter = ['status', 'reviewed']
    search_fields = ['session_id', 'patient_name', 'psychologist_name', 'payment_id']
    readonly_fields = ['session_id', 'created_at', 'updated_at']
