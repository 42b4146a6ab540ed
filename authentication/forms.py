from django import forms


class LoginForm(forms.Form):
    username = forms.CharField(
        max_length=150,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Username", "autofocus": True})
    )
    password = forms.CharField(
        max_length=128,
        widget=forms.PasswordInput(attrs={"class": "form-control", "placeholder": "Password"})
    )

    def clean_username(self):
        return self.cleaned_data['username'].strip()
