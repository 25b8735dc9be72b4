from django import forms

from .models import User


class LoginForm(forms.Form):
    email = forms.EmailField()
    password = forms.CharField(strip=False)


class SignupForm(forms.Form):
    name = forms.CharField(max_length=150)
    email = forms.EmailField()
    password = forms.CharField(strip=False, min_length=8)
    role = forms.ChoiceField(
        choices=User.Role.choices,
        required=False,
        initial=User.Role.MEMBER,
    )

    def clean_email(self):
        email = self.cleaned_data["email"].strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError("An account with this email already exists.")
        return email

    def clean_role(self):
        return self.cleaned_data.get("role") or User.Role.MEMBER


class UserUpdateForm(forms.Form):
    """
    Partial update: only fields present in the submitted data
    end up in ``changes``.
    """

    name = forms.CharField(max_length=150, required=False)
    email = forms.EmailField(required=False)
    role = forms.ChoiceField(choices=User.Role.choices, required=False)
    avatar_url = forms.URLField(max_length=500, required=False)

    @property
    def changes(self):
        return {
            field: value
            for field, value in self.cleaned_data.items()
            if field in self.data
        }
