"""Registration, login, logout and profile views."""

from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views import View
from django.views.generic import TemplateView

from storefront.core.exceptions import DuplicateUser, InvalidCredentials
from storefront.core.mixins import ShopperRequiredMixin

from . import services
from .forms import LoginForm, RegistrationForm


class RegisterView(View):
    template_name = "accounts/register.html"

    def get(self, request):
        return render(request, self.template_name, {"form": RegistrationForm()})

    def post(self, request):
        form = RegistrationForm(request.POST)
        if not form.is_valid():
            return render(request, self.template_name, {"form": form}, status=400)

        try:
            services.register_user(
                username=form.cleaned_data["username"],
                email=form.cleaned_data["email"],
                password=form.cleaned_data["password"],
                phone=form.cleaned_data["phone"],
            )
        except DuplicateUser as e:
            form.add_error(None, e.message)
            return render(request, self.template_name, {"form": form}, status=e.status_code)

        messages.success(request, "Account created. Please log in.")
        return redirect("accounts:login")


class LoginView(View):
    """Email/password login. Shoppers who are already logged in go to their profile."""

    template_name = "accounts/login.html"

    def get(self, request):
        if request.auth_context.is_authenticated:
            return redirect("accounts:profile")
        return render(request, self.template_name, {"form": LoginForm(), "next": request.GET.get("next", "")})

    def post(self, request):
        form = LoginForm(request.POST)
        next_url = request.POST.get("next", "")
        if not form.is_valid():
            return render(request, self.template_name, {"form": form, "next": next_url}, status=400)

        try:
            services.log_in(request, form.cleaned_data["email"], form.cleaned_data["password"])
        except InvalidCredentials as e:
            form.add_error(None, e.message)
            return render(request, self.template_name, {"form": form, "next": next_url}, status=e.status_code)

        if url_has_allowed_host_and_scheme(
            next_url, allowed_hosts={request.get_host()}, require_https=request.is_secure()
        ):
            return redirect(next_url)
        return redirect("catalog:home")


class LogoutView(View):
    def get(self, request):
        services.log_out(request)
        return redirect("catalog:home")


class ProfileView(ShopperRequiredMixin, TemplateView):
    """Profile page showing the shopper's account details."""

    template_name = "accounts/profile.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        profile = services.get_profile(self.get_auth_context())

        context.update({
            "profile": profile,
            "username": profile.username,
            "email": profile.email,
            "phone": profile.phone,
        })

        return context
