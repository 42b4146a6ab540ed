from django import forms

from inventory.validators import clean_text
from orders.models import Rating

SCORE_CHOICES = [(i, str(i)) for i in range(1, 6)]


class LanguageSelectForm(forms.Form):
    lang = forms.CharField(max_length=5)


class LocationSelectForm(forms.Form):
    menu_type = forms.IntegerField(min_value=1)


class RatingForm(forms.ModelForm):
    service_rating = forms.TypedChoiceField(choices=SCORE_CHOICES, coerce=int, widget=forms.RadioSelect)
    staff_rating = forms.TypedChoiceField(choices=SCORE_CHOICES, coerce=int, widget=forms.RadioSelect)
    cleanliness_rating = forms.TypedChoiceField(choices=SCORE_CHOICES, coerce=int, widget=forms.RadioSelect)
    overall_experience = forms.ChoiceField(choices=Rating.EXPERIENCE_CHOICES, widget=forms.RadioSelect)

    class Meta:
        model = Rating
        fields = [
            'customer_name', 'customer_phone', 'service_rating', 'staff_rating',
            'cleanliness_rating', 'overall_experience', 'comment',
        ]
        widgets = {
            'customer_name': forms.TextInput(attrs={"class": "form-control"}),
            'customer_phone': forms.TextInput(attrs={"class": "form-control", "inputmode": "tel"}),
            'comment': forms.Textarea(attrs={"class": "form-control", "rows": 3, "maxlength": 1000}),
        }

    def clean_customer_name(self):
        return clean_text(self.cleaned_data.get('customer_name'), 255, 'name') or None

    def clean_customer_phone(self):
        return clean_text(self.cleaned_data.get('customer_phone'), 20, 'phone') or None

    def clean_comment(self):
        return clean_text(self.cleaned_data.get('comment'), 1000, 'comment') or None
