from django import forms

from accounts.models import User
from .models import Task


class TaskForm(forms.ModelForm):
    """
    Create form. Every field is required except priority,
    which defaults to Medium.
    """

    assignee = forms.ModelChoiceField(queryset=User.objects.all(), required=False)

    class Meta:
        model = Task
        fields = [
            "title",
            "description",
            "assignee",
            "deadline",
            "priority",
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["priority"].required = False


class TaskUpdateForm(forms.Form):
    title = forms.CharField(max_length=200, required=False)
    description = forms.CharField(required=False)
    deadline = forms.DateField(required=False)
    priority = forms.ChoiceField(choices=Task.Priority.choices, required=False)
    status = forms.ChoiceField(choices=Task.Status.choices, required=False)
    score = forms.IntegerField(min_value=0, max_value=100, required=False)

    @property
    def changes(self):
        return {
            field: value
            for field, value in self.cleaned_data.items()
            if field in self.data
        }


class TransferForm(forms.Form):
    assignee = forms.ModelChoiceField(queryset=User.objects.all())
    confirm = forms.BooleanField(required=False)


class ScoreForm(forms.Form):
    score = forms.IntegerField(min_value=0, max_value=100)
