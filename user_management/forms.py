from django import forms
from .models import Role


class RoleForm(forms.ModelForm):

    class Meta:
        model = Role
        fields = ['name']
        labels = {'name': 'Role'}
        widgets = {
            'name': forms.TextInput(attrs={
                'class': 'block w-full rounded-md border-0 py-1.5 text-gray-900 shadow-sm ring-1 ring-inset ring-gray-300 placeholder:text-gray-400 focus:ring-2 focus:ring-inset focus:ring-blue-600 sm:text-sm sm:leading-6',
                'placeholder': 'ROLE_EDITOR'
            }),
        }
