from django.contrib import admin

from .models import Psychologist, PsychologistAvailability


class PsychologistAvailabilityInline(admin.TabularInline):
    model = PsychologistAvailability
    extra = 0


@admin.register(Psychologist)
class PsychologistAdmin(admin.ModelAdmin):
    list_display = ['display_name', 'crp', 'hourly_rate', 'rating', 'reviews_count']
    search_fields = ['user__email', 'user__full_name', 'crp']
    inlines = [PsychologistAvailabilityInline]
